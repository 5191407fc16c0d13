"""Deploy a script file to the server and redeploy it whenever it changes."""

__version__ = "0.1.0"
