"""Trinity backend project package.

This repository groups modules for the Trinity clan family website backend:
Clash of Clans API retrieval, roster-sheet ingestion, the Clan War League
eligibility and capacity filter, clan statistics, and the aiohttp web server
that serves them behind a short-lived cache. Subpackages are organized by
responsibility (`cocapi`, `sheets`, `cwl`, `clanstats`, `shared` and `webapp`).
"""
