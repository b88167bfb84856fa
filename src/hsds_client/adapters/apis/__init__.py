"""HSDS resource APIs.

Why a package:
- One module per resource kind (domain, group, link, dataset, datatype,
  attribute), each a stateless façade over `HsdsClient`.
"""

from hsds_client.adapters.apis.attribute import AttributeApi
from hsds_client.adapters.apis.dataset import DatasetApi
from hsds_client.adapters.apis.datatype import DatatypeApi
from hsds_client.adapters.apis.domain import DomainApi
from hsds_client.adapters.apis.group import GroupApi
from hsds_client.adapters.apis.link import LinkApi

__all__ = [
    "AttributeApi",
    "DatasetApi",
    "DatatypeApi",
    "DomainApi",
    "GroupApi",
    "LinkApi",
]
