"""Backend access, row mapping, and the in-memory organization snapshot."""
from .schemas import CapitalType, EcosystemStats, EcosystemType, Organization, OrganizationFilter, Stage
from .normalize import derive_type, map_company_row, map_company_rows, parse_financial_amount
from .client import ChangeEvent, ChangeSubscription, EcosystemClient
from .store import EcosystemStore
