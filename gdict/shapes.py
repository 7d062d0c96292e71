from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

# Output-shape constraints handed to the generation service, rendered to JSON
# schema. What comes back is checked against the pydantic models in schemas.py,
# the same ones the client parses with.

ShapeType = Literal['object', 'array', 'string', 'integer', 'boolean']

@dataclass(frozen=True)
class Shape:
    type: ShapeType
    nullable: bool = False
    required: bool = True
    description: Optional[str] = None
    properties: Dict[str, 'Shape'] = field(default_factory=dict)
    items: Optional['Shape'] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {'type': [self.type, 'null'] if self.nullable else self.type}
        if self.description:
            schema['description'] = self.description
        if self.type == 'object':
            schema['properties'] = {name: prop.to_json_schema() for name, prop in self.properties.items()}
            schema['required'] = self.required_fields()
        elif self.type == 'array' and self.items is not None:
            schema['items'] = self.items.to_json_schema()
        return schema

    def required_fields(self) -> List[str]:
        return [name for name, prop in self.properties.items() if prop.required]

def string(**kwargs) -> Shape:
    return Shape('string', **kwargs)

def integer(**kwargs) -> Shape:
    return Shape('integer', **kwargs)

def obj(properties: Dict[str, Shape], **kwargs) -> Shape:
    return Shape('object', properties=properties, **kwargs)

def array(items: Shape, **kwargs) -> Shape:
    return Shape('array', items=items, **kwargs)

DICTIONARY_ENTRY = obj({
    'word': string(),
    'correction': string(nullable=True, required=False),
    'pronunciation': string(),
    'level': string(description='CEFR level, one of A1, A2, B1, B2, C1, C2'),
    'frequency_score': integer(description='0-100'),
    'frequency_label': string(),
    'word_family': obj({
        'noun': string(nullable=True, required=False),
        'verb': string(nullable=True, required=False),
        'adjective': string(nullable=True, required=False),
        'adverb': string(nullable=True, required=False),
    }, nullable=True, required=False),
    'idioms_slang': array(obj({
        'phrase': string(),
        'meaning_tr': string(),
    }), nullable=True, required=False),
    'collocations': array(string()),
    'synonyms': array(string()),
    'meanings': array(obj({
        'type': string(),
        'definition_tr': string(),
        'example_en': string(),
        'example_tr': string(),
    })),
})

WORD_OF_THE_DAY = obj({
    'word': string(),
    'definition_tr': string(),
    'context': string(),
})

GRAMMAR_ANALYSIS = obj({
    'analysis_status': string(description='Durum (Örn: Mükemmel / Minor Hata / Kritik Hata)'),
    'overall_summary': string(description='Metnin genel akıcılığı, grameri ve tonu hakkında kısa, yapıcı bir özet.'),
    'tone': string(description='Metnin Tonu (Örn: Formal / Informal / Akademik / Conversational)'),
    'errors': array(obj({
        'type': string(description='Hata Tipi (Örn: Grammar / Tense / Spelling / Punctuation)'),
        'error_text': string(description='Hata içeren kelime veya kelime grubu'),
        'explanation': string(description='Hatanın dilbilgisel açıklaması ve kuralı'),
        'suggestion': string(description='Doğru kullanım şekli'),
    })),
    'suggested_revision': string(description='Tüm hatalar giderildikten sonra metnin tamamının düzeltilmiş, en akıcı hali.'),
})
