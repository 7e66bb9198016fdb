"""
StudyFlow - Content Analyzer Tests
"""

import pytest

from studyflow.models.enums import ContentDifficulty, RelationshipType
from studyflow.services.analysis.content_analyzer import (
    ContentAnalyzer,
    analyze_content_for_learning,
    extract_key_concepts,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def analyzer():
    return ContentAnalyzer()


class TestContentAnalyzer:

    def test_empty_content(self, analyzer):
        analysis = analyzer.analyze("")

        assert analysis.key_concepts == []
        assert analysis.main_topics == []
        assert analysis.educational_value == 0
        assert analysis.content_quality == 0
        assert analysis.readability_score == 5.0
        assert analysis.difficulty_level == ContentDifficulty.BASIC

    def test_analysis_is_deterministic(self, analyzer, mitosis_content):
        assert analyzer.analyze(mitosis_content) == analyzer.analyze(mitosis_content)

    def test_definition_recorded(self, analyzer):
        content = "Photosynthesis is the process by which plants convert light into chemical energy."

        analysis = analyzer.analyze(content)

        photosynthesis = [c for c in analysis.key_concepts if c.term.lower() == "photosynthesis"]
        assert photosynthesis
        assert photosynthesis[0].definitions

    def test_concepts_ranked_and_bounded(self, analyzer, mitosis_content):
        analysis = analyzer.analyze(mitosis_content)
        importances = [c.importance for c in analysis.key_concepts]

        assert analysis.key_concepts
        assert importances == sorted(importances, reverse=True)
        assert all(0 <= value <= 10 for value in importances)
        assert len(analysis.key_concepts) <= 20
        assert len(analysis.main_concepts) >= min(3, len(analysis.key_concepts))
        assert 0 <= analysis.educational_value <= 10
        assert 1 <= analysis.readability_score <= 10

    def test_frequent_terms_become_concepts(self, analyzer, mitosis_content):
        terms = [c.term.lower() for c in analyzer.analyze(mitosis_content).key_concepts]

        assert "mitosis" in terms

    def test_relationship_cue(self, analyzer):
        content = (
            "Cytokinesis happens after mitosis because mitosis leaves one cell with two nuclei. "
            "Biologists study cytokinesis together with mitosis. "
            "Cytokinesis splits the cytoplasm."
        )

        relationships = analyzer.analyze(content).conceptual_relationships
        pair = [
            r for r in relationships
            if {r.concept1.lower(), r.concept2.lower()} == {"cytokinesis", "mitosis"}
        ]

        assert pair
        assert pair[0].relationship == RelationshipType.CAUSES

    @pytest.mark.parametrize("word,expected", [("the", 1), ("cell", 1), ("mitosis", 3), ("divide", 2)])
    def test_count_syllables(self, word, expected):
        assert ContentAnalyzer._count_syllables(word) == expected


class TestModuleFunctions:

    def test_convenience_functions_agree(self, mitosis_content):
        analysis = analyze_content_for_learning(mitosis_content)

        assert extract_key_concepts(mitosis_content) == [c.term for c in analysis.key_concepts]
