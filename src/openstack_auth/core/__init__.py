"""
Core building blocks: constants, transport, wire schema, service catalog
and credential sources (clouds.yaml and OS_* environment variables).
"""
