"""Functional tests: the cdcroute CLI driven through CliRunner."""
