"""JSON-RPC 2.0 messages, IDs, params and errors, and a WSGI request handler."""