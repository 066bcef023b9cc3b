"""Tracking bounded context — Tracked Orders and their Checkpoint history.

Keeps a mutable "current status" projection per physical order in step with
an append-only ledger of status observations, and tells the buyer when
shipping progress happens. Persistence, order lookup and notification
delivery are collaborators reached through ports.
"""

from protean.domain import Domain

tracking = Domain(name="tracking")
