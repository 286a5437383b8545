"""
Knowledge-base ingestion and context-retrieval engine.

Accepts uploaded documents, deduplicates and chunks them, answers keyword
queries against the corpus, and assembles length-bounded context blocks for
the community bot's chatbot commands.
"""
