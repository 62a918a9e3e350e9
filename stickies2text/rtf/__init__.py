"""
RTF Text Engine
===============

The stages that turn RTF bytes into plain text, leaf first:

    byte_reader    one-byte lookahead over the raw input
    tokenizer      lexical tokens: groups, control words/symbols, bytes
    destinations   group stack deciding visible text versus metadata
    escapes        control words, symbols and escapes to characters
    emitter        ordered output buffer

Each stage can be driven on its own; converter.parse_rtf wires them together.
"""
