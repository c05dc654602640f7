"""Recommendation engine - membership comparison for a family's visit plan.

Modules:
    config      Comparison knobs (tie-breaks, savings cap, discount ordering)
    candidates  Fully-loaded annual cost per tiered membership product
    selector    Cheapest-candidate selection and the Pay-As-You-Go check
    breakdown   Itemized cost lines and savings figures
    engine      Orchestrates the pipeline and builds the Recommendation

Pipeline:
    AdmissionPricer (baseline) → CandidateBuilder → CandidateSelector
    → RecommendationEngine.recommend
"""
