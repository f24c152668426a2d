"""
Core utilities shared across Kokizami: exceptions, logging, validation,
path configuration and CLI helpers.
"""
