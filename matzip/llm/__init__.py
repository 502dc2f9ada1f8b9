"""
Generative-text access for the insight and keyword generators.

- ``config``: Groq credentials, model and timeouts from the environment.
- ``groq_client``: the ``TextGenerator`` interface and its Groq implementation.
- ``parsing``: turning free-text answers into bullet lists, prose or JSON.
"""
