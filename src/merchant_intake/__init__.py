"""
Merchant application intake.

This package holds both halves of the lead form:

- Form core (state, validation, step navigation, submission): `merchant_intake.session`
- Intake endpoint (persist + CRM relay): `merchant_intake.api.main`
"""
