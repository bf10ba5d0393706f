# CUI // SP-PROPIN
"""RFP question analysis core for the RFP Analyzer.

Modules:
    models      — QuestionRecord / ResponseRecord / QualityReport data types
    segmenter   — split raw RFP text into numbered question records
    classifier  — rule-based question type and category detection
    validator   — four-axis quality report for a drafted response

Everything here is pure and in-memory: no I/O, no shared state.
"""
