"""Shared FastMCP instance that every tools module registers on."""
from fastmcp import FastMCP

mcp = FastMCP("Google Ads ROI Tools")
