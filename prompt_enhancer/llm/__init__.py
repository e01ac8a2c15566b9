"""Completion access package.

Architectural role:
    Provides endpoint configuration, request-payload construction, and the
    transport adapter used by the enhancement engine to reach the remote
    text-completion service.

Module split:
    - `provider_config`: environment-driven endpoint and credential configuration.
    - `service`: instruction + prompt to payload adapter.
    - `client`: HTTP transport and status handling.
"""
