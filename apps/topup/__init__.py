"""
Top-Up App - Token Top-Up Report Generation

Responsibilities:
- Validate raw company and user records (strict field types)
- Keep active users whose company_id resolves to a valid company
- Enrich them with the company's top-up and email permission
- Group by company id, sort by case-insensitive last name
- Render the tab-indented text report and write it to the output file

Inputs:
- companies.json, users.json (JSON arrays of records)

Outputs:
- output.txt (report text)
- optional rejects JSONL file (dropped records with error_reason)

Usage:
    python -m apps.topup -u users.json -c companies.json -o output.txt
"""
