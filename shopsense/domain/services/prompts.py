from typing import Sequence

from shopsense.domain.models.product import Product
from shopsense.domain.services.context_assembler import RAGContext, compact_preferences, compact_product
from shopsense.utils.payload import json_minify

SHOPPING_ASSISTANT_SYSTEM = (
    "You are an expert shopping assistant helping Indian shoppers find the best products. "
    "Prices are in rupees. Use ONLY the provided product CONTEXT; never invent products."
)

EXTRACTION_SYSTEM = "You extract shopping entities from user queries. Return strict JSON only."

TRANSLATION_SYSTEM = "You translate e-commerce shopping assistant text. Return only the translated text."


def extraction_task(user_query: str) -> str:
    output_format = (
        '{"productType":"main product category","budget":{"min":0,"max":0},'
        '"brands":["preferred brands"],"features":["required features"],'
        '"priority":"price|quality|ratings|brand|delivery",'
        '"language":"language of the query","sentiment":"positive|neutral|negative"}'
    )
    return (
        "Extract shopping-related entities from this user query.\n\n"
        f"QUERY: {json_minify({'text': user_query})}\n\n"
        "RULES:\n"
        "- Omit fields you cannot find\n"
        "- Budget values are plain numbers in rupees\n"
        "- Format: strict JSON, no markdown\n\n"
        "OUTPUT FORMAT: " + output_format
    )


def recommendation_task(query_text: str, context: RAGContext) -> str:
    payload = {
        "query": query_text,
        "products": [compact_product(p) for p in context.product_data],
        "user_preferences": compact_preferences(context.user_preferences),
    }
    return (
        f"CONTEXT: {json_minify(payload)}\n\n"
        "Based on the CONTEXT, provide personalized product recommendations with:\n"
        "1. Top 3-5 product suggestions\n"
        "2. Why each product matches the user's needs\n"
        "3. Price-to-value analysis\n"
        "4. Links to purchase (if available)\n"
        "5. Alternative options if budget changes\n\n"
        "Make the response conversational, helpful, and action-oriented."
    )


def comparison_task(products: Sequence[Product], user_query: str) -> str:
    payload = {
        "query": user_query,
        "products": [compact_product(p) for p in products],
    }
    return (
        f"CONTEXT: {json_minify(payload)}\n\n"
        "Provide a detailed comparison of these products highlighting:\n"
        "1. Best value for money\n"
        "2. Top-rated option\n"
        "3. Budget-friendly choice\n"
        "4. Overall recommendation with reasoning\n\n"
        "Format: clear, concise, and user-friendly with emojis for emphasis."
    )


def translation_task(text: str, language: str) -> str:
    return (
        f"Translate the following shopping assistant text to {language}.\n"
        "Keep the tone friendly and conversational.\n"
        "Maintain the meaning and context for e-commerce shopping.\n\n"
        f"TEXT: {json_minify({'text': text})}\n\n"
        "Provide only the translated text without explanation."
    )


IMAGE_ANALYSIS_TASK = (
    "Analyze this product image and provide: "
    "1) Product type and category 2) Visible features "
    "3) Quality assessment 4) Price range estimate. Be concise."
)


def value_proposition_task(product: Product) -> str:
    return (
        f"PRODUCT: {json_minify(compact_product(product))}\n\n"
        "Provide a one-line value proposition that highlights why this product is worth buying."
    )
