"""Member aggregate, contracts, errors and workflows."""
