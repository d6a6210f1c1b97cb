"""Newbee Match.

A thin backend between the matching front end and Salesforce.

High-level architecture
-----------------------

- ``newbee_match.crm``: async Salesforce REST facade (query, find, create,
  delete, identity) and the OAuth2 web-server flow.
- ``newbee_match.server``: FastAPI application. A request dependency resolves
  the session cookie into a ``CrmContext`` (session + Salesforce client) and
  passes it to the services:

  - ``MatchService``: validate a NewBee/Mentor pair, then create or delete the
    Relationship record linking them.
  - ``ReportService``: Contact/Relationship listings and the NewBee/Mentor
    tables used by the matching UI.

- ``newbee_match.core``: logging configuration and Logfire monitoring.
"""
