"""
Query interpretation and ranked lookup.

This package turns free-form input into ranked dictionary matches:
- tokenizer: split input into raw tokens per search mode
- expander: canonicalize tokens and expand variants/tones into keywords
- plan: cross keywords with the columns a mode searches
- merger: run the probes, keep each record's best rank
- sqlite_storage: the SQLite dictionary store and its builder
"""
