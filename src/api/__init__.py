"""API: HTTP and WebSocket edge.

Responsibilities:
- Parse requests and run the guard chain
- Delegate to app/use_cases
- Render results and errors as JSON

Subpackages:
- validators/: rule tables for request payloads
- routes/: endpoints per resource (auth, crops, realtime, health)

MUST NOT contain: persistence, identity provider calls, email rendering.
"""
