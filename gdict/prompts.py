from __future__ import annotations

def lookup_prompt(word: str) -> str:
    return f"""Analyze the English word "{word}".

Step 1: Check for spelling errors.
- If the word is misspelled (e.g., "eliphant"), identify the correct word (e.g., "elephant").
- If the word is correct, the correction is null.

Step 2: Generate the dictionary entry.
- IF A CORRECTION EXISTS: Generate the data for the CORRECTED word (not the misspelled one).
- IF NO CORRECTION: Generate data for the original word.

Output Requirements:
- 'correction': The corrected word if misspelled, otherwise null.
- 'word': The actual word you are defining (the corrected one if applicable).
- 'pronunciation': IPA format.
- 'level': CEFR level (A1-C2).
- 'frequency_score': 0-100.
- 'frequency_label': e.g., "Common", "Rare".
- 'word_family': The morphological variations based on the root (Noun, Verb, Adjective, Adverb). Pick the most common form for each. Return null if a form doesn't exist.
- 'idioms_slang': Identify up to 3 common idioms, phrasal verbs, or slang usages where this word is a key component. Return the phrase and its Turkish meaning. Return empty array if none.
- 'collocations': 4-5 common word combinations.
- 'synonyms': List of synonyms.
- 'meanings': Turkish definitions with English/Turkish examples.

If the word is completely unrecognizable/gibberish and no reasonable correction exists, return empty arrays for lists, but try to find a correction if possible."""

def daily_word_prompt() -> str:
    return """Generate 1 interesting, sophisticated English word (CEFR Level C1 or C2) suitable for "Word of the Day".

It should be a word that is useful in academic or professional contexts but might not be known by everyone.

Return JSON with:
- word: The word itself.
- definition_tr: A short, punchy Turkish definition (max 10 words).
- context: A very short English sentence showing usage."""

def grammar_prompt(text: str) -> str:
    return f"""Rol: Sen kıdemli bir ELT (English Language Teaching) Profesörüsün ve akademik düzeyde bir editörsün. Analizlerin detaylı, açıklayıcı ve pedagojik olmalı.

Görev: Kullanıcının girdiği metni analiz et, hataları bul ve daha iyi bir versiyon öner.

Kullanıcı Metni:
"{text}"

Kurallar:
1. Analiz sonuçlarını, kullanıcının kolayca anlayabileceği bir Türkçe ile yaz.
2. Hata bulunamazsa "errors" dizisi boş olmalıdır.
3. Olabildiğince çok hata türünü tespit et ve "type" alanını kullan.
4. "suggested_revision" alanında metnin tamamının düzeltilmiş halini ver."""
