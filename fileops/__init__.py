"""File, text-search and shell/network tools served to tool-calling clients."""
