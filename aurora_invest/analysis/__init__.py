"""
Analysis Engine: classifies one stock snapshot against an investor profile
and assembles an ``AnalysisResult``.

Modules
-------
fundamentals : classify_fundamentals() + calculate_fundamentals_quality_score()
               + build_fundamentals_insight().
valuation    : calculate_peg() + evaluate_peg() + classify_valuation()
               + build_valuation_insight().
technicals   : analyze_technicals(): trend / momentum / 52-week position.
sentiment    : analyze_sentiment(): consensus text, target outlook, news.
scenarios    : generate_scenarios(): bull / base / bear bands.
guidance     : generate_planning_guidance(): canned profile-keyed guidance.
history      : calculate_returns() + calculate_volatility() + detect_trend()
               + summarize_history().
views        : compose_*_view() text builders used by the engine.
engine       : analyze_stock() orchestrator + build_summary().

Every function here is pure. The only ambient input, the timestamp on the
result, comes from an injected ``Clock``.
"""
