"""HTTP API: shared dependencies and the root router.

The root router lives in ``zatch.api.router``; importing it mounts every
module, so it is not imported here.
"""
