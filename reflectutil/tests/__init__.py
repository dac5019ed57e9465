"""Tests for reflectutil."""
