"""
Infrastructure layer: adapters behind the application ports.

Local key/value storage, remote profile documents, identity and the media
catalog client, plus `bootstrap.build_app_context()` which wires them up.
"""
