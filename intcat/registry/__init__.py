"""Registry — the flat JSON document of cataloged integrations.

The registry provides:
- Data model: one IntegrationEntry per cataloged integration
- Loading: read the document from disk or a URL, failing loudly
- Validation: required fields, formats and stale-verification warnings
- Submission: the template contributors copy when adding a listing
"""
