"""
Updates engine for biotrack.

This package handles:
- Resolving the polymorphic references stored on updates (registry)
- Creating update rows when something notifiable happens (notify)
- Batch-loading the records a page of updates refers to (cache)
- Grouping updates into feed entries, including live activity (grouping)
- Marking updates viewed and pruning superseded rows (pruning)
- Sending update digests by email (emailer)
"""
