"""Click commands for the releaselog CLI."""
