# Sent verbatim with every upload; not user-editable.
HEADSHOT_PROMPT = """The Universal Corporate Headshot Prompt
Subject & Composition:
Create a photorealistic, high-resolution corporate headshot of the individual from the provided image, framed from the chest up. The subject should be rendered with a confident yet approachable expression, featuring a subtle and genuine smile to convey trustworthiness and professionalism. Ensure their posture is upright and relaxed, with shoulders slightly angled towards the camera for a dynamic composition.
Professional Attire:
Dress the subject in sharp, contemporary business attire. This should consist of a well-tailored dark suit jacket, in either navy blue or charcoal gray, worn over a crisp, white or light-blue collared shirt or blouse. The clothing must appear to be of high-quality fabric, perfectly fitted, and free of any wrinkles.
Studio Lighting:
Employ a classic and flattering studio lighting scheme. Use a soft key light to gently define and sculpt the facial features (loop lighting is preferred). Add a subtle fill light to soften shadows on the opposite side of the face, ensuring detail is preserved. Include a gentle hair light or rim light from behind to create clear separation from the background. It is critical that there are distinct, professional catchlights visible in the subject's eyes to bring them to life.
Background:
Place the subject against a seamless, solid, neutral-gray studio background. The background should be clean and unobtrusive, featuring a subtle, smooth gradient that is slightly darker at the bottom and lighter towards the top. This will add a sense of depth while ensuring the subject remains the sole focus.
Photographic Specifications:
The final image must emulate the quality of a professional DSLR camera equipped with an 85mm prime portrait lens, shot at an aperture of f/2.8. This will produce a shallow depth of field, rendering the subject's eyes and facial features in tack-sharp focus while the background is softly and pleasingly blurred (bokeh). The final output must be high-resolution, sharp, and entirely free of digital noise or artifacts."""
