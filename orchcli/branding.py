"""Product naming used across CLI output and file locations."""

PRODUCT_NAME = "Orch CLI"
CLI_PRIMARY_COMMAND = "orch-cli"
