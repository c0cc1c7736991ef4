"""Control surface for the NordVPN command-line client."""
