# =============================================================================
# SSE Push Client -- Package Logger
# =============================================================================
#
# Library code never configures handlers; applications opt in with
# logging.getLogger("sse_push_client").setLevel(...).
# =============================================================================

import logging

logger = logging.getLogger("sse_push_client")
