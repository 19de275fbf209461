"""pinclaim - upload files to IPFS and manage their proof-of-burn pin claims."""

__version__ = "0.1.0"
