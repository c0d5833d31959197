"""Core framework: data types, errors, events, configuration and the tool base class."""
