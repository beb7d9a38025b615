"""Rust syntax helpers: node traversal, marker classification, types and expressions."""
