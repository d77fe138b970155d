"""Downstream HTTP connectors."""

from api_hub_applications.boundary.connectors.apim_connector import ApimConnector
from api_hub_applications.boundary.connectors.autopublish_connector import AutopublishConnector
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.connectors.idms_connector import IdmsConnector
from api_hub_applications.boundary.connectors.integration_catalogue_connector import IntegrationCatalogueConnector
from api_hub_applications.boundary.connectors.internal_auth_connector import InternalAuthConnector

__all__ = [
    "ApimConnector",
    "AutopublishConnector",
    "EmailConnector",
    "IdmsConnector",
    "IntegrationCatalogueConnector",
    "InternalAuthConnector",
]
