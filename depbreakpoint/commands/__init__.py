"""Click subcommands for depbreakpoint."""
