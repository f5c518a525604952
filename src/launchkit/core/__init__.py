"""launchkit core package."""
