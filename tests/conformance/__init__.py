"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the star registry chain.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_linkage.py - Hash linkage and height invariants
2. test_tamper_detection.py - Validator reports every tampered block
3. test_atomicity.py - Refused appends leave the chain unchanged
4. test_time_window.py - Ownership proofs expire after 300 seconds
5. test_concurrency.py - Concurrent appends never break linkage

These tests use hypothesis for property-based testing.
"""
