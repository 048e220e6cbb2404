"""Subspecifications for the transaction tracker."""
