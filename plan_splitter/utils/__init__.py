"""Utility helpers for the plan splitter"""
