"""
Prefect flows for the report pipeline.

Flows:
- report: Fetch species, counts and recency scans; write the two CSV tables
- render: Turn the CSV tables into a self-contained HTML report

Usage (local):
    python -m inat_rarity.flows.report <username> [output_dir]
    python -m inat_rarity.flows.render <username> [output_dir]

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    inat-rarity run <username> ./out
"""
