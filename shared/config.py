"""Runtime configuration, read once from the environment (and an optional .env file)."""

import os

from dotenv import load_dotenv

load_dotenv()


'''
    Default configuration values.
    Every value can be overridden with the environment variable of the same name, upper-cased.
'''

# Published Google Sheets CSV exports for the roster tabs.
_SHEET_BASE = "https://docs.google.com/spreadsheets/d/e/2PACX-1vTv9TiS1-uWKWghHNDyv1WNpZCPUew08SyzE4AwV5zksRHYdHOz_fcWi0FSKdHeL-Z0IpKNa-nMxEiY/pub"

defaults = {
    "coc_api_token": os.getenv("COC_API_TOKEN", ""),
    "coc_api_base_url": os.getenv("COC_API_BASE_URL", "https://api.clashofclans.com/v1"),
    "coc_timeout": float(os.getenv("COC_TIMEOUT", "10")),          #Seconds before a single upstream call is abandoned.
    "coc_batch_size": int(os.getenv("COC_BATCH_SIZE", "5")),        #Concurrent clan lookups per batch, kept small for the API rate limit.
    "coc_batch_delay": float(os.getenv("COC_BATCH_DELAY", "0.1")),  #Pause between batches, in seconds.
    "cwl_clans_csv_url": os.getenv("CWL_CLANS_CSV_URL", f"{_SHEET_BASE}?gid=1640581717&single=true&output=csv"),
    "trinity_clans_csv_url": os.getenv("TRINITY_CLANS_CSV_URL", f"{_SHEET_BASE}?gid=419279330&single=true&output=csv"),
    "sheets_timeout": float(os.getenv("SHEETS_TIMEOUT", "15")),
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", "3001")),
    "frontend_url": os.getenv("FRONTEND_URL", "*"),                #Allowed CORS origin for the website frontend; "*" allows any.
}

# Cache time-to-live per kind of data, in seconds.
CACHE_TTL = {
    "CLAN_BASIC": 600,
    "CLAN_WAR": 300,        #Changes during war.
    "CLAN_WAR_LOG": 1800,
    "CLAN_RAIDS": 3600,     #Weekly data.
    "GOOGLE_SHEETS": 900,
    "STATS": 600,
    "CWL_FILTERED": 600,
}

DEFAULT_CACHE_TTL = 600
