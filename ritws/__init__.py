"""
RIT Webservices Client
=======================================================
Python client for the RIT tourism-data SOAP webservices
(https://maps.pot.gov.pl/rit-soap-server/).
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       Settings (credentials, instance, transport)
  domain/       Pure business objects (models, exceptions) — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete implementations of each Port (zeep, requests)
  services/     Request shaping, category resolution, metadata lookups;
                depends only on Ports, never Adapters
  interfaces/   Delivery layer: CLI
  tests/        Full test suite: unit / integration / e2e

Three ways to use it, each needing less manual work:
  1. Raw SOAP: ZeepWebserviceAdapter.invoke(service, operation, request)
  2. Request shaping: RITClient builds requests for every remote operation
  3. Decoding: MetadataCatalog resolves categories, attributes, dictionaries
"""
__version__ = "1.0.0"
