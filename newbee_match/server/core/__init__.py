"""Server core: settings, constants and the server-side session store."""
