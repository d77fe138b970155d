"""
API Hub applications backend.

Applications, teams and access requests for the API Hub, with the
credentials, scopes and deployments they manage in IDMS and APIM.
"""

__version__ = "0.1.0"
