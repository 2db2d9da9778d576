# Services package.
#
#   comment_service  - create comments/replies, read assembled threads
#
# Service functions take the ``Store`` as their first argument so that the
# router layer decides which store instance a request runs against (see
# ``ovo.dependencies.get_store``).  Each function opens its own store
# transaction.
