"""Localized finding text for store diagnoses. Placeholders use str.format fields."""

from typing import Any, Dict

DEFAULT_LANG = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        # Tags
        "tag_none": "Could not retrieve tags. Please check manually.",
        "tag_none_tip": "Check the Steam store page directly to ensure 20 tags are set.",
        "tag_few": "Too few tags (currently {tag_count} / recommended 20)",
        "tag_few_tip": "Steam recommends up to 20 tags. Fewer tags means less visibility in recommendations.",
        "tag_low": "Tag count is low (currently {tag_count} / recommended 20)",
        "tag_low_tip": "Adding a few more tags will help more users discover your game.",
        "tag_ok": "Tag count is appropriate ({tag_count})",
        "tag_broad": "Top tags include overly broad tags: {broad_tags}",
        "tag_broad_tip": 'Broad tags like "Indie" or "Action" create search noise. Place more specific tags (e.g., Roguelike, Metroidvania) at the top.',
        "tag_top_ok": "Top 5 tags are specific",
        "tag_no_specific": "No specific genre-defining tags found",
        "tag_no_specific_tip": "Add tags that clearly define your game's characteristics, such as Roguelike, Metroidvania, or Souls-like.",
        "tag_specific_ok": "Specific genre tags are set",

        # Visuals
        "trailer_none": "No trailer video is set",
        "trailer_none_tip": "Trailers are the most important element on a store page. Make sure to add at least one.",
        "trailer_one": "Only one trailer is set",
        "trailer_one_tip": "A second video (gameplay-focused or an update trailer) gives visitors more to judge the game by.",
        "trailer_ok": "Trailer videos: {trailer_count} set",
        "screenshot_none": "No screenshots are set",
        "screenshot_none_tip": "At least 10 screenshots are recommended. Show gameplay variety.",
        "screenshot_few": "Too few screenshots (currently {screenshot_count} / recommended 10+)",
        "screenshot_few_tip": "Games with 5 or fewer screenshots are often seen as low quality. Prepare 10 or more.",
        "screenshot_low": "Screenshots are somewhat low (currently {screenshot_count} / recommended 10+)",
        "screenshot_low_tip": "Add screenshots showing gameplay variety, not just UI.",
        "screenshot_ok": "Screenshots: {screenshot_count} (sufficient)",
        "screenshot_rich": "Screenshots: {screenshot_count} (excellent coverage)",
        "header_ok": "Header image is set",
        "header_none": "No header image is set",
        "header_none_tip": "Capsule images are the most important visual, displayed everywhere on Steam.",

        # Text: lengths
        "short_desc_none": "Short description is not set",
        "short_desc_none_tip": "This text appears in search results and wishlists. Convey your game's appeal concisely.",
        "short_desc_short": "Short description is too short (currently {short_desc_length} characters)",
        "short_desc_short_tip": "Use 100-300 characters to convey your game's core appeal (USP).",
        "short_desc_long": "Short description may be too long (currently {short_desc_length} characters)",
        "short_desc_long_tip": 'Important parts may be truncated with "...". Put the most important information first.',
        "short_desc_ok": "Short description: {short_desc_length} characters (appropriate length)",
        "detailed_desc_none": "Detailed description is not set",
        "detailed_desc_none_tip": "Explain your game's features, story, and systems in detail.",
        "detailed_desc_short": "Detailed description is short",
        "detailed_desc_short_tip": "Explain your game's features in more detail and insert GIF images for visual appeal.",
        "detailed_desc_ok": "Detailed description is set",

        # Text: structure
        "media_animated": "Detailed description includes images and GIF/video ({animation_count} detected)",
        "media_images": "Detailed description includes images",
        "media_images_tip": "Adding GIF videos will better convey gameplay",
        "media_none": "No images/GIFs in detailed description",
        "media_none_tip": "Walls of text are not read. Place gameplay GIFs to keep it visually engaging.",
        "headings_ok": "Headings and emphasis are used",
        "headings_none": "No headings or emphasis found",
        "headings_none_tip": 'Divide content into sections with headings like "Features", "Story", "System" for better readability.',
        "breaks_ok": "Proper paragraph breaks are used",
        "breaks_sparse": "Few line breaks create a wall of text",
        "breaks_sparse_tip": "Add line breaks every 2-3 sentences and blank lines between sections for readability.",
        "breaks_none": "The description has no paragraph breaks",
        "breaks_none_tip": "Split the text into short paragraphs so it can be skimmed.",

        # Text: AI evaluation
        "ai_improvement_tip": "Suggested by the AI description review.",

        # Basic info
        "languages_none": "No language support information",
        "languages_none_tip": "Set supported languages.",
        "languages_limited": "Supported languages are limited ({language_count} languages)",
        "languages_limited_tip": "Supporting English, Japanese, and Simplified Chinese at minimum will help reach global markets.",
        "languages_ok": "Supported languages: {language_count}",
        "genres_none": "No genres are set",
        "genres_none_tip": "Genre settings affect Steam classification. Select appropriate genres.",
        "genres_ok": "Genres: {genre_names}",
        "categories_few": "Few categories (features) are set",
        "categories_few_tip": "Set all applicable features like single-player, achievements, controller support.",
        "categories_ok": "Categories: {category_count} set",
        "price_free": "Pricing: Free",
        "price_set": "Pricing: {price}",

        # Grades
        "grade_S": "Perfect",
        "grade_A": "Pass",
        "grade_B": "Good",
        "grade_C": "Needs Work",
        "grade_D": "Poor",
        "grade_F": "Critical",
    },
    "ja": {
        "tag_none": "タグが取得できませんでした。手動で確認してください。",
        "tag_none_tip": "Steamストアページを直接確認し、タグが20個設定されているか確認してください。",
        "tag_few": "タグが少なすぎます（現在{tag_count}個 / 推奨20個）",
        "tag_few_tip": "Steamは最大20個のタグを推奨しています。タグが少ないと「おすすめ」に表示される機会を失います。",
        "tag_low": "タグ数が少なめです（現在{tag_count}個 / 推奨20個）",
        "tag_low_tip": "あと数個タグを追加することで、より多くのユーザーに発見されやすくなります。",
        "tag_ok": "タグ数は適切です（{tag_count}個）",
        "tag_broad": "上位タグに広義すぎるタグがあります: {broad_tags}",
        "tag_broad_tip": "「Indie」「Action」などの広義なタグは検索ノイズになりやすいです。より具体的なタグ（例: Roguelike, Metroidvania）を上位に配置してください。",
        "tag_top_ok": "上位5タグは具体的です",
        "tag_no_specific": "ジャンルを明確に定義する具体的なタグがありません",
        "tag_no_specific_tip": "Roguelike、Metroidvania、Souls-likeなど、ゲームの特徴を明確に示すタグを追加してください。",
        "tag_specific_ok": "具体的なジャンルタグが設定されています",

        "trailer_none": "トレーラー動画が設定されていません",
        "trailer_none_tip": "トレーラーはストアページで最も重要な要素です。必ず1本以上設定してください。",
        "trailer_one": "トレーラー動画が1本のみです",
        "trailer_one_tip": "ゲームプレイ中心の動画を追加すると、購入判断の材料が増えます。",
        "trailer_ok": "トレーラー動画: {trailer_count}本設定済み",
        "screenshot_none": "スクリーンショットが設定されていません",
        "screenshot_none_tip": "スクリーンショットは最低10枚以上推奨です。ゲームプレイの多様性を見せてください。",
        "screenshot_few": "スクリーンショットが少なすぎます（現在{screenshot_count}枚 / 推奨10枚以上）",
        "screenshot_few_tip": "スクショが5枚以下だと「地雷ゲーム」と判断されやすいです。10枚以上用意してください。",
        "screenshot_low": "スクリーンショットがやや少なめです（現在{screenshot_count}枚 / 推奨10枚以上）",
        "screenshot_low_tip": "UIだけでなく、ゲームプレイの多様性を見せるスクショを追加してください。",
        "screenshot_ok": "スクリーンショット: {screenshot_count}枚（十分な数）",
        "screenshot_rich": "スクリーンショット: {screenshot_count}枚（非常に充実）",
        "header_ok": "ヘッダー画像が設定されています",
        "header_none": "ヘッダー画像が設定されていません",
        "header_none_tip": "カプセル画像はSteamのあらゆる場所で表示される最重要ビジュアルです。",

        "short_desc_none": "短い説明文が設定されていません",
        "short_desc_none_tip": "検索結果やウィッシュリストに表示される文章です。ゲームの魅力を簡潔に伝えてください。",
        "short_desc_short": "短い説明文が短すぎます（現在{short_desc_length}文字）",
        "short_desc_short_tip": "100〜300文字でゲームの核となる魅力（USP）を伝えてください。",
        "short_desc_long": "短い説明文が長すぎる可能性があります（現在{short_desc_length}文字）",
        "short_desc_long_tip": "「...」で省略される可能性があります。最も重要な情報を先頭に置いてください。",
        "short_desc_ok": "短い説明文: {short_desc_length}文字（適切な長さ）",
        "detailed_desc_none": "詳細説明文が設定されていません",
        "detailed_desc_none_tip": "ゲームの特徴、ストーリー、システムを詳しく説明してください。",
        "detailed_desc_short": "詳細説明文が短めです",
        "detailed_desc_short_tip": "ゲームの特徴をより詳しく説明し、GIF画像を挿入して視覚的に訴求してください。",
        "detailed_desc_ok": "詳細説明文が設定されています",

        "media_animated": "詳細説明に画像とGIF/動画が含まれています（{animation_count}件検出）",
        "media_images": "詳細説明に画像が含まれています",
        "media_images_tip": "GIF動画を追加するとゲームプレイがより伝わります",
        "media_none": "詳細説明に画像/GIFがありません",
        "media_none_tip": "文字だけの説明は読まれません。ゲームプレイのGIFを配置して視覚的に訴求してください。",
        "headings_ok": "見出しや強調が使われています",
        "headings_none": "見出しや強調がありません",
        "headings_none_tip": "「特徴」「ストーリー」「システム」などの見出しでセクションを分けると読みやすくなります。",
        "breaks_ok": "適切に段落が分けられています",
        "breaks_sparse": "改行が少なく、文字の壁になっています",
        "breaks_sparse_tip": "2〜3文ごとに改行し、セクション間に空行を入れて読みやすくしてください。",
        "breaks_none": "説明文に段落の区切りがありません",
        "breaks_none_tip": "流し読みできるよう、短い段落に分けてください。",

        "ai_improvement_tip": "AIによる説明文レビューからの提案です。",

        "languages_none": "対応言語の情報がありません",
        "languages_none_tip": "対応言語を設定してください。",
        "languages_limited": "対応言語が少なめです（{language_count}言語）",
        "languages_limited_tip": "最低でも英語・日本語・簡体字中国語に対応すると、グローバル市場に届きやすくなります。",
        "languages_ok": "対応言語: {language_count}言語",
        "genres_none": "ジャンルが設定されていません",
        "genres_none_tip": "ジャンル設定はSteamの分類に影響します。適切なジャンルを選択してください。",
        "genres_ok": "ジャンル: {genre_names}",
        "categories_few": "カテゴリ（機能）の設定が少なめです",
        "categories_few_tip": "シングルプレイヤー、実績、コントローラー対応など、該当する機能をすべて設定してください。",
        "categories_ok": "カテゴリ: {category_count}個設定済み",
        "price_free": "価格設定: 無料",
        "price_set": "価格設定: {price}",

        "grade_S": "完璧",
        "grade_A": "合格",
        "grade_B": "良好",
        "grade_C": "要改善",
        "grade_D": "不十分",
        "grade_F": "危険",
    },
}


def get_message(lang: str, key: str, **values: Any) -> str:
    """Look up `key` in `lang` (falling back to English, then to the key itself)."""
    catalog = MESSAGES.get(lang) or MESSAGES[DEFAULT_LANG]
    template = catalog.get(key) or MESSAGES[DEFAULT_LANG].get(key)
    if template is None:
        return key
    return template.format(**values) if values else template
