"""micromanage test suite."""
