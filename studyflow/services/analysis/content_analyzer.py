"""
Content Analysis Service

Heuristic analysis of study material: concept extraction, topic clustering,
learning objectives, concept relationships and quality indicators.
The analysis is a pure function of the input text.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ...core.constants import (
    ABSTRACT_TERMS,
    ANALYSIS_STOP_WORDS,
    MAIN_CONCEPT_IMPORTANCE,
    MAIN_CONCEPT_SHARE,
    MAX_CONTEXTS_PER_CONCEPT,
    MAX_FREQUENT_TERMS,
    MAX_IMPORTANT_TERMS,
    MAX_KEY_CONCEPTS,
    MAX_LEARNING_OBJECTIVES,
    MAX_RELATIONSHIPS,
    MAX_TOPICS,
    MIN_MAIN_CONCEPTS,
    MIN_TERM_FREQUENCY,
    OBJECTIVE_ACTION_VERBS,
    SOURCE_CHUNK_LENGTH,
)
from ...models.enums import ContentDifficulty, RelationshipType, TermType
from ...models.schemas import (
    ConceptInfo,
    ConceptRelationship,
    ContentAnalysis,
    TermInfo,
    TopicInfo,
)

logger = logging.getLogger(__name__)

TECHNICAL_TERM_PATTERNS = [
    re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,3}\b"),  # multi-word proper nouns
    re.compile(r"\b[A-Z]{2,}\b(?!\s*[.!?])"),  # acronyms, not at sentence end
    re.compile(r"\b[a-z]+(?:-[a-z]+)+\b"),  # hyphenated terms
    re.compile(r"\b\w+(?:tion|sion|ment|ness|ity|ism|ology|graphy)\b"),
]

EMPHASIS_PATTERNS = [
    re.compile(r'"([^"]{3,50})"'),
    re.compile(r"\*\*([^*]{3,50})\*\*"),
    re.compile(r"\*([^*]{3,50})\*"),
    re.compile(r"\b([A-Z][A-Z\s]{3,30})\b"),
]

DEFINITION_PATTERNS = [
    re.compile(
        r"([A-Za-z][A-Za-z\s]{2,30})\s+(?:is|are|means|refers to|defined as)\s+([^.!?]{10,200})[.!?]",
        re.IGNORECASE,
    ),
    re.compile(r"([A-Za-z][A-Za-z\s]{2,30}):\s*([^.\n]{10,200})[.\n]", re.IGNORECASE),
]

# Ordered: the first matching cue decides the relationship type
RELATIONSHIP_CUES: List[Tuple[Tuple[str, ...], RelationshipType, float]] = [
    (("is a", "defined as"), RelationshipType.DEFINES, 0.9),
    (("because", "causes", "results in"), RelationshipType.CAUSES, 0.8),
    (("however", "unlike", "different"), RelationshipType.CONTRASTS, 0.7),
    (("example", "such as", "for instance"), RelationshipType.EXEMPLIFIES, 0.6),
    (("explain", "therefore"), RelationshipType.EXPLAINS, 0.7),
]


@dataclass
class _ConceptDraft:
    """Mutable concept record used while the analysis is being built."""
    term: str
    frequency: int = 1
    importance: float = 0.0
    context: List[str] = field(default_factory=list)
    definitions: List[str] = field(default_factory=list)
    is_main_concept: bool = False

    def freeze(self) -> ConceptInfo:
        return ConceptInfo(
            term=self.term,
            frequency=self.frequency,
            importance=self.importance,
            context=self.context,
            definitions=self.definitions,
            is_main_concept=self.is_main_concept,
        )


def _looks_technical(term: str) -> bool:
    return bool(re.match(r"[A-Z]", term) or re.search(r"[A-Z]{2,}", term))


class ContentAnalyzer:
    """
    Service that turns raw study text into a ContentAnalysis.

    Holds no state between calls.
    """

    def analyze(self, content: str) -> ContentAnalysis:
        """
        Analyze study material for question generation.

        Args:
            content: Raw study text

        Returns:
            Complete content analysis
        """
        logger.debug("Starting content analysis")

        clean_content = self._preprocess(content)
        sentences = self._segment_sentences(clean_content)
        paragraphs = self._segment_paragraphs(content)

        concepts = self._extract_concepts(clean_content, sentences)
        topics = self._identify_topics(paragraphs, concepts)
        terms = self._extract_terms(concepts)
        objectives = self._generate_objectives(concepts, topics)
        relationships = self._map_relationships(concepts, sentences)

        content_quality = self._assess_content_quality(clean_content, concepts, topics)
        educational_value = self._assess_educational_value(concepts, objectives, relationships)
        readability = self._calculate_readability(clean_content)
        coherence = self._assess_topic_coherence(topics, paragraphs)
        difficulty = self._assess_difficulty(clean_content, concepts, readability)

        logger.info(
            f"Analysis complete: {len(concepts)} concepts "
            f"({sum(1 for c in concepts if c.is_main_concept)} main), {len(topics)} topics, "
            f"quality={content_quality}, educational_value={educational_value}, difficulty={difficulty.value}"
        )

        return ContentAnalysis(
            key_concepts=[concept.freeze() for concept in concepts],
            main_topics=topics,
            learning_objectives=objectives,
            important_terms=terms,
            conceptual_relationships=relationships,
            difficulty_level=difficulty,
            content_quality=content_quality,
            educational_value=educational_value,
            readability_score=readability,
            topic_coherence=coherence,
        )

    def extract_key_concepts(self, content: str) -> List[str]:
        """Return only the ranked concept terms of the content."""
        return [concept.term for concept in self.analyze(content).key_concepts]

    # ------------------------------------------------------------------
    # Segmentation
    # ------------------------------------------------------------------

    @staticmethod
    def _preprocess(content: str) -> str:
        text = re.sub(r"\s+", " ", content)
        text = re.sub(r"[“”]", '"', text)
        text = re.sub(r"[‘’]", "'", text)
        return text.strip()

    @staticmethod
    def _segment_sentences(content: str) -> List[str]:
        parts = re.split(r"(?<=[.!?])\s+(?=[A-Z])", content)
        return [part.strip() for part in parts if len(part.strip()) > 10]

    @staticmethod
    def _segment_paragraphs(content: str) -> List[str]:
        parts = re.split(r"\n\s*\n+", content)
        return [part.strip() for part in parts if len(part.strip()) > 50]

    # ------------------------------------------------------------------
    # Concepts
    # ------------------------------------------------------------------

    def _extract_concepts(self, content: str, sentences: List[str]) -> List[_ConceptDraft]:
        concepts: Dict[str, _ConceptDraft] = {}

        for term in self._technical_terms(content):
            self._add_concept(concepts, term, content)
        for term, definition in self._defined_terms(content):
            self._add_concept(concepts, term, content, definition)
        for term in self._emphasized_terms(content):
            self._add_concept(concepts, term, content)
        for term, _ in self._frequent_terms(content):
            self._add_concept(concepts, term, content)

        ranked = list(concepts.values())
        for concept in ranked:
            concept.importance = self._concept_importance(concept, content)
        ranked.sort(key=lambda c: c.importance, reverse=True)

        threshold = max(MIN_MAIN_CONCEPTS, math.ceil(len(ranked) * MAIN_CONCEPT_SHARE))
        for index, concept in enumerate(ranked):
            concept.is_main_concept = index < threshold or concept.importance > MAIN_CONCEPT_IMPORTANCE

        return ranked[:MAX_KEY_CONCEPTS]

    @staticmethod
    def _technical_terms(content: str) -> List[str]:
        terms: Dict[str, None] = {}
        for pattern in TECHNICAL_TERM_PATTERNS:
            for match in pattern.findall(content):
                if 3 < len(match) < 50:
                    terms[match.strip()] = None
        return list(terms)

    @staticmethod
    def _defined_terms(content: str) -> List[Tuple[str, str]]:
        definitions = []
        for pattern in DEFINITION_PATTERNS:
            for match in pattern.finditer(content):
                definitions.append((match.group(1).strip(), match.group(2).strip()))
        return definitions

    @staticmethod
    def _emphasized_terms(content: str) -> List[str]:
        terms: Dict[str, None] = {}
        for pattern in EMPHASIS_PATTERNS:
            for match in pattern.finditer(content):
                term = match.group(1).strip()
                if 2 < len(term) < 50:
                    terms[term] = None
        return list(terms)

    @staticmethod
    def _frequent_terms(content: str) -> List[Tuple[str, int]]:
        frequency: Dict[str, int] = {}
        for word in re.findall(r"\b[a-z]{3,}\b", content.lower()):
            if word not in ANALYSIS_STOP_WORDS and len(word) > 3:
                frequency[word] = frequency.get(word, 0) + 1

        frequent = [(term, count) for term, count in frequency.items() if count >= MIN_TERM_FREQUENCY]
        frequent.sort(key=lambda item: item[1], reverse=True)
        return frequent[:MAX_FREQUENT_TERMS]

    def _add_concept(
        self,
        concepts: Dict[str, _ConceptDraft],
        term: str,
        content: str,
        definition: Optional[str] = None,
    ) -> None:
        key = term.lower().strip()
        if len(key) < 2:
            return

        existing = concepts.get(key)
        if existing:
            existing.frequency += 1
            if definition and definition not in existing.definitions:
                existing.definitions.append(definition)
            return

        concepts[key] = _ConceptDraft(
            term=term.strip(),
            context=self._extract_contexts(term, content),
            definitions=[definition] if definition else [],
        )

    @staticmethod
    def _extract_contexts(term: str, content: str, max_contexts: int = MAX_CONTEXTS_PER_CONCEPT) -> List[str]:
        pattern = re.compile(rf"[^.!?]*\b{re.escape(term)}\b[^.!?]*[.!?]", re.IGNORECASE)
        contexts = []
        for match in pattern.findall(content)[:max_contexts]:
            snippet = match.strip()[:SOURCE_CHUNK_LENGTH]
            contexts.append(snippet + ("..." if len(match) > SOURCE_CHUNK_LENGTH else ""))
        return contexts

    @staticmethod
    def _concept_importance(concept: _ConceptDraft, content: str) -> float:
        score = min(3.0, concept.frequency / 2)

        if concept.definitions:
            score += 2
        if 4 <= len(concept.term) <= 25:
            score += 1

        opening = content[:int(len(content) * 0.2)]
        if concept.term.lower() in opening.lower():
            score += 2

        if len(concept.context) > 1:
            score += 1
        if _looks_technical(concept.term):
            score += 1

        return min(10.0, score)

    # ------------------------------------------------------------------
    # Topics, terms, objectives, relationships
    # ------------------------------------------------------------------

    def _identify_topics(self, paragraphs: List[str], concepts: List[_ConceptDraft]) -> List[TopicInfo]:
        clusters: Dict[str, List[str]] = {}
        for paragraph in paragraphs:
            lowered = paragraph.lower()
            present = [c for c in concepts if c.term.lower() in lowered]
            if not present:
                continue
            main_concept = max(present, key=lambda c: c.importance)
            clusters.setdefault(main_concept.term, []).append(paragraph)

        topics = []
        for topic_name, topic_paragraphs in clusters.items():
            relevant = [
                c for c in concepts
                if any(c.term.lower() in p.lower() for p in topic_paragraphs)
            ]
            topics.append(TopicInfo(
                topic=topic_name,
                relevance=sum(c.importance for c in relevant) / len(relevant),
                keywords=[c.term for c in relevant[:5]],
                coherence_score=self._topic_coherence(topic_paragraphs, relevant),
            ))

        topics.sort(key=lambda t: t.relevance, reverse=True)
        return topics[:MAX_TOPICS]

    @staticmethod
    def _topic_coherence(paragraphs: List[str], concepts: List[_ConceptDraft]) -> float:
        if not paragraphs or not concepts:
            return 0.0

        total = 0.0
        for concept in concepts:
            appearances = sum(1 for p in paragraphs if concept.term.lower() in p.lower())
            total += (appearances / len(paragraphs)) * concept.importance

        return min(10.0, total / len(concepts))

    @staticmethod
    def _extract_terms(concepts: List[_ConceptDraft]) -> List[TermInfo]:
        terms = []
        for concept in concepts[:MAX_IMPORTANT_TERMS]:
            term_type = TermType.CONCEPT
            if concept.definitions:
                term_type = TermType.DEFINITION
            elif _looks_technical(concept.term):
                term_type = TermType.TECHNICAL

            terms.append(TermInfo(
                term=concept.term,
                type=term_type,
                importance=concept.importance,
                context=concept.context[0] if concept.context else "",
            ))
        return terms

    @staticmethod
    def _generate_objectives(concepts: List[_ConceptDraft], topics: List[TopicInfo]) -> List[str]:
        objectives = []
        main_concepts = [c for c in concepts if c.is_main_concept][:3]

        for index, concept in enumerate(main_concepts):
            if concept.importance > 8:
                verbs = OBJECTIVE_ACTION_VERBS["advanced"]
            elif concept.importance > 6:
                verbs = OBJECTIVE_ACTION_VERBS["intermediate"]
            else:
                verbs = OBJECTIVE_ACTION_VERBS["basic"]
            verb = verbs[index % len(verbs)]

            if concept.definitions:
                objectives.append(f"{verb} the concept of {concept.term} and its significance")
            else:
                objectives.append(f"{verb} how {concept.term} relates to the main topic")

        for topic in topics[:2]:
            objectives.append(f"Analyze the key principles and applications of {topic.topic}")

        if len(main_concepts) > 1:
            pair = " and ".join(c.term for c in main_concepts[:2])
            objectives.append(f"Evaluate the relationships between {pair}")

        return objectives[:MAX_LEARNING_OBJECTIVES]

    @staticmethod
    def _infer_relationship(shared_sentences: List[str]) -> Tuple[RelationshipType, float]:
        combined = " ".join(shared_sentences).lower()
        for cues, relationship, strength in RELATIONSHIP_CUES:
            if any(cue in combined for cue in cues):
                return relationship, strength
        return RelationshipType.RELATES_TO, 0.5

    def _map_relationships(self, concepts: List[_ConceptDraft], sentences: List[str]) -> List[ConceptRelationship]:
        relationships = []
        lowered_sentences = [(s, s.lower()) for s in sentences]

        for first in concepts:
            for second in concepts:
                if first.term == second.term:
                    continue
                a, b = first.term.lower(), second.term.lower()
                shared = [s for s, low in lowered_sentences if a in low and b in low]
                if not shared:
                    continue
                relationship, strength = self._infer_relationship(shared)
                relationships.append(ConceptRelationship(
                    concept1=first.term,
                    concept2=second.term,
                    relationship=relationship,
                    strength=strength,
                    evidence=shared[:2],
                ))

        relationships.sort(key=lambda r: r.strength, reverse=True)
        return relationships[:MAX_RELATIONSHIPS]

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    @staticmethod
    def _assess_content_quality(content: str, concepts: List[_ConceptDraft], topics: List[TopicInfo]) -> float:
        score = 0

        word_count = len(re.split(r"\s+", content))
        if 100 < word_count < 5000:
            score += 2
        elif word_count > 50:
            score += 1

        main_count = sum(1 for c in concepts if c.is_main_concept)
        if main_count > 5:
            score += 3
        elif main_count > 2:
            score += 2
        elif main_count > 0:
            score += 1

        if topics:
            avg_coherence = sum(t.coherence_score for t in topics) / len(topics)
            if avg_coherence > 7:
                score += 2
            elif avg_coherence > 5:
                score += 1

        defined = sum(1 for c in concepts if c.definitions)
        if defined > 3:
            score += 2
        elif defined > 0:
            score += 1

        if re.search(r"\n\s*\n", content) or re.search(r"\d+\.", content) or re.search(r"#{1,6}", content):
            score += 1

        return float(min(10, score))

    @staticmethod
    def _assess_educational_value(
        concepts: List[_ConceptDraft],
        objectives: List[str],
        relationships: List[ConceptRelationship],
    ) -> float:
        score = 0

        high_importance = sum(1 for c in concepts if c.importance > 7)
        if high_importance > 3:
            score += 3
        elif high_importance > 1:
            score += 2
        elif high_importance > 0:
            score += 1

        if len(objectives) > 3:
            score += 2
        elif len(objectives) > 1:
            score += 1

        strong = sum(1 for r in relationships if r.strength > 0.7)
        if strong > 2:
            score += 2
        elif strong > 0:
            score += 1

        defined = sum(1 for c in concepts if c.definitions)
        if defined > 2:
            score += 2
        elif defined > 0:
            score += 1

        if sum(1 for c in concepts if len(c.context) > 1) > 2:
            score += 1

        return float(min(10, score))

    @staticmethod
    def _count_syllables(word: str) -> int:
        word = word.lower()
        if len(word) <= 3:
            return 1

        count = 0
        previous_was_vowel = False
        for char in word:
            is_vowel = char in "aeiouy"
            if is_vowel and not previous_was_vowel:
                count += 1
            previous_was_vowel = is_vowel

        # silent 'e'
        if word.endswith("e") and count > 1:
            count -= 1

        return max(1, count)

    def _calculate_readability(self, content: str) -> float:
        """Simplified Flesch reading ease mapped onto 1-10."""
        sentences = [s for s in re.split(r"[.!?]+", content) if len(s.strip()) > 5]
        words = content.split()
        if not sentences or not words:
            return 5.0

        syllables = sum(self._count_syllables(word) for word in words)
        words_per_sentence = len(words) / len(sentences)
        syllables_per_word = syllables / len(words)

        score = 206.835 - (1.015 * words_per_sentence) - (84.6 * syllables_per_word)
        return max(1.0, min(10.0, score / 10))

    @staticmethod
    def _assess_topic_coherence(topics: List[TopicInfo], paragraphs: List[str]) -> float:
        if not topics or not paragraphs:
            return 0.0
        return min(10.0, sum(t.coherence_score for t in topics) / len(topics))

    @staticmethod
    def _assess_difficulty(content: str, concepts: List[_ConceptDraft], readability: float) -> ContentDifficulty:
        score = 0

        if readability < 4:
            score += 2
        elif readability < 6:
            score += 1

        technical = sum(1 for c in concepts if _looks_technical(c.term) or c.definitions)
        if technical > 8:
            score += 2
        elif technical > 4:
            score += 1

        lowered = content.lower()
        if any(term in lowered for term in ABSTRACT_TERMS):
            score += 1

        if sum(1 for c in concepts if c.importance > 8) > 3:
            score += 1

        if score <= 1:
            return ContentDifficulty.BASIC
        if score <= 3:
            return ContentDifficulty.INTERMEDIATE
        return ContentDifficulty.ADVANCED


# Global analyzer instance
_content_analyzer: ContentAnalyzer | None = None


def get_content_analyzer() -> ContentAnalyzer:
    """Get the global content analyzer instance."""
    global _content_analyzer
    if _content_analyzer is None:
        _content_analyzer = ContentAnalyzer()
    return _content_analyzer


def analyze_content_for_learning(content: str) -> ContentAnalysis:
    """Analyze study material with the global analyzer."""
    return get_content_analyzer().analyze(content)


def extract_key_concepts(content: str) -> List[str]:
    """Return the ranked concept terms of the content."""
    return get_content_analyzer().extract_key_concepts(content)
