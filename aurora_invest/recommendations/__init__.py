"""
Recommendation Synthesizer: blends an ``AnalysisResult``, the investor's
profile and an optional ``PortfolioContext`` into a bounded
``ActiveManagerRecommendation``.

Modules
-------
synthesizer : Adjustment dataclass + confidence rule functions
              + determine_timeframe() + calculate_confidence_score()
              + determine_primary_action() + generate_risk_flags()
              + generate_headline() + generate_rationale()
              + build_active_manager_recommendation(): pure functions, no I/O.
"""
