"""Exam preparation planner service."""
