"""
Build and provisioning support for the gateway functions.

- artifact: package each handler into a deterministic zip
- gateway: generate the gateway routing template
- settings: provisioning inputs shared by both
"""

__version__ = "1.0.0"
