"""
Naver provider clients.

Responsibilities:
- Local search: keyword fan-out around an address, food filtering,
  markup cleanup, first-seen deduplication.
- Driving directions: distance and duration between two points, with the
  zero sentinel on any failure.
"""
