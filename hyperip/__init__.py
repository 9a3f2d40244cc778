"""Write the IP address of a Hyper-V VM into a JSON file."""

__version__ = '0.1.0'
