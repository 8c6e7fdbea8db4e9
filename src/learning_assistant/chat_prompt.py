from __future__ import annotations

from collections.abc import Sequence

from learning_assistant.types import NewsArticle, SearchResult

LEARNING_SYSTEM_PROMPT = """Kamu adalah asisten pembelajaran yang ramah dan membantu.
Berikan jawaban yang terstruktur dengan format berikut dalam Bahasa Indonesia yang mudah dipahami:

👋 Mulai dengan sapaan yang ramah dan personal.

### Penjelasan Utama
- Jelaskan konsep dengan bahasa yang sederhana
- Sertakan contoh konkret yang relevan
- Bagi menjadi poin-poin yang mudah diikuti
- Gunakan analogi jika membantu pemahaman

### Sumber Belajar
- Link artikel/dokumentasi resmi (format: [Judul](link))
- Video pembelajaran terpilih dengan deskripsi singkat
- Rekomendasi kursus online yang relevan
- Repository kode contoh jika ada

### Langkah Selanjutnya
- Topik-topik lanjutan yang sebaiknya dipelajari
- Project latihan yang disarankan
- Tips implementasi praktis

Gunakan markdown untuk format yang rapi dan jelas. Sertakan emoji yang relevan untuk meningkatkan keterbacaan. Pastikan setiap respons bersifat personal dan memotivasi pembelajaran.
"""

NEWS_SYSTEM_PROMPT = """Kamu adalah asisten yang ahli dalam merangkum berita. Berikan rangkuman yang informatif dan objektif menggunakan format markdown berikut:

# [Topik Utama]

## Ringkasan Utama
[Paragraf singkat yang merangkum inti dari semua berita]

## Poin-Poin Penting
[Daftar bullet point dari informasi penting]

## Detail Berita
### [Subtopik 1]
- [Detail poin 1]
- [Detail poin 2]

### [Subtopik 2]
- [Detail poin 1]
- [Detail poin 2]

## Konteks
- [Informasi tambahan yang relevan]
- [Implikasi atau dampak]

> **Catatan**: Rangkuman ini dibuat berdasarkan berita dari berbagai sumber tepercaya.
"""

LEARNING_GREETING = (
    "👋 Halo! Saya asisten pembelajaran Anda.\n\n"
    "### Apa yang bisa saya bantu?\n"
    "Saya bisa membantu Anda belajar berbagai topik dengan:\n"
    "- Penjelasan yang mudah dipahami\n"
    "- Contoh praktis dan relevan\n"
    "- Sumber belajar yang terverifikasi\n"
    "- Panduan langkah demi langkah\n\n"
    "### Mulai Belajar\n"
    "Silakan ketik pertanyaan atau topik yang ingin Anda pelajari."
)

NO_NEWS_FOUND_TEXT = "Tidak ada berita yang ditemukan untuk topik ini."


def format_search_content(results: Sequence[SearchResult]) -> str:
    return "\n\n".join(f"{result.title}\n{result.description}" for result in results)


def format_articles_text(articles: Sequence[NewsArticle]) -> str:
    return "\n\n".join(
        f"Judul: {article.title}\n"
        f"Deskripsi: {article.description}\n"
        f"Sumber: {article.source}\n"
        for article in articles
    )


def build_learning_messages(*, query: str, search_content: str) -> list[dict[str, str]]:
    clean_query = query.lower().strip()
    return [
        {"role": "system", "content": LEARNING_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "Berikut adalah beberapa referensi yang relevan:\n\n"
                f"{search_content}\n\n"
                "Berdasarkan referensi tersebut, tolong bantu saya belajar tentang: "
                f"{clean_query}"
            ),
        },
    ]


def build_news_messages(articles: Sequence[NewsArticle]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": NEWS_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "Tolong rangkum berita-berita berikut ini menggunakan format yang "
                f"ditentukan:\n\n{format_articles_text(articles)}"
            ),
        },
    ]


def build_fallback_news_summary(articles: Sequence[NewsArticle]) -> str:
    if not articles:
        return "Tidak ada berita yang ditemukan."

    lead = articles[0]
    sections = [
        "# Rangkuman Berita Terkini",
        "## Berita Utama",
        f"**{lead.title}**",
        lead.description,
        f"> *Sumber: {lead.source}*",
        "## Berita Terkait",
    ]
    for article in articles[1:]:
        description = article.description or "Tidak ada deskripsi tersedia."
        sections.append(
            f"### {article.title}\n{description}\n\n> *Sumber: {article.source}*"
        )
    sections.append(
        "---\n*Rangkuman ini dibuat secara otomatis dari sumber-sumber berita "
        "terpercaya.*"
    )
    return "\n\n".join(sections)
