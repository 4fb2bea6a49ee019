"""Roster ingestion from the published Google Sheets CSV tabs."""

from sheets.models import RosterRequirement
from sheets.sheets import SheetsClient

__all__ = ["RosterRequirement", "SheetsClient"]
