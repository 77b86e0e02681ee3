"""Shared helper libraries"""
